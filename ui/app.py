# ABOUTME: Streamlit UI: token sign-in, dream form (generate steps + save) and dreams list with progress.
# ABOUTME: API URL configurable via API_URL env; provider token stored in session_state, sent as Bearer on requests.

import os

import requests
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

from core.config import DEFAULT_DREAMS_PAGE_SIZE

API_URL = os.environ.get("API_URL", "http://localhost:8000")
SESSION_ACCESS_TOKEN = "access_token"

DOMAIN_LABELS = {
    "startup": "🚀 Startup Goal",
    "personal": "❤️ Personal Goal",
    "academic": "🎓 Academic Goal",
}


def _domain_label(domain: str) -> str:
    """Human label for a domain value; unknown values are shown as-is."""
    return DOMAIN_LABELS.get(domain, domain)


def _progress_caption(progress: dict | None) -> str:
    """'N of M steps completed (P%)' from the progress object returned by the API."""
    progress = progress or {}
    completed = progress.get("completed", 0)
    total = progress.get("total", 0)
    percent = progress.get("percent", 0)
    return f"{completed} of {total} steps completed ({percent}%)"


def _safe_json(response: requests.Response):
    """Parse response body as JSON; return dict or empty dict on failure."""
    try:
        return response.json()
    except ValueError:
        return {}


def _error_message(response: requests.Response, fallback: str) -> str:
    body = _safe_json(response)
    if isinstance(body, dict) and body.get("error"):
        return body["error"]
    return fallback


def _auth_headers():
    """Return headers with Bearer token for authenticated API calls, or empty dict if signed out."""
    token = st.session_state.get(SESSION_ACCESS_TOKEN)
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


def _clear_auth_and_rerun():
    """Remove token from session and rerun to show the sign-in screen."""
    if SESSION_ACCESS_TOKEN in st.session_state:
        del st.session_state[SESSION_ACCESS_TOKEN]
    st.rerun()


def _render_sign_in():
    st.title("Dream to Reality Planner")
    st.write("Sign in with the access token from your account provider.")
    with st.form("sign_in_form"):
        token = st.text_input("Access token", type="password")
        if st.form_submit_button("Sign in"):
            if not (token and token.strip()):
                st.error("Enter an access token.")
            else:
                st.session_state[SESSION_ACCESS_TOKEN] = token.strip()
                st.rerun()


def _create_dream(dream: str, domain: str) -> bool:
    """Generate steps for the dream, then save dream + steps. Returns True when both succeed."""
    try:
        r = requests.post(
            f"{API_URL}/generate-steps",
            json={"dream": dream, "domain": domain},
            headers=_auth_headers(),
            timeout=90,
        )
    except requests.RequestException as e:
        st.error(f"Could not reach the API: {e}")
        return False
    if r.status_code == 401:
        _clear_auth_and_rerun()
        return False
    if r.status_code != 200:
        st.error(_error_message(r, f"Unexpected error: {r.status_code}"))
        return False
    steps = _safe_json(r).get("steps")
    if not steps:
        st.error("Invalid response from server. Please try again.")
        return False

    try:
        r = requests.post(
            f"{API_URL}/dreams",
            json={"dream": dream, "domain": domain, "steps": steps},
            headers=_auth_headers(),
            timeout=10,
        )
    except requests.RequestException as e:
        st.error(f"Could not reach the API: {e}")
        return False
    if r.status_code != 200:
        st.error(_error_message(r, "Failed to create dream"))
        return False
    return True


def _render_dream_form():
    st.subheader("What's your dream?")
    st.caption(
        "Describe your big, ambitious goal. Don't worry about the details, we'll break it down for you."
    )
    domain = st.selectbox(
        "Domain", list(DOMAIN_LABELS), format_func=_domain_label, key="dream_domain"
    )
    dream = st.text_area(
        "Your dream",
        placeholder='e.g. "I want to build the next Google" or "I want to become fluent in 5 languages"',
        height=120,
        key="dream_text",
    )
    if st.button("Generate Action Plan", key="generate_btn"):
        if not (dream and dream.strip()):
            st.error("Please describe your dream")
            return
        with st.spinner("Creating your roadmap..."):
            if _create_dream(dream.strip(), domain):
                st.success("Dream created with actionable steps!")


def _toggle_step(step: dict) -> None:
    try:
        r = requests.patch(
            f"{API_URL}/steps/{step['id']}",
            json={"completed": not step["completed"]},
            headers=_auth_headers(),
            timeout=10,
        )
    except requests.RequestException:
        st.error("Failed to update step")
        return
    if r.status_code != 200:
        st.error(_error_message(r, "Failed to update step"))


def _delete_dream(dream_id: str) -> None:
    try:
        r = requests.delete(
            f"{API_URL}/dreams/{dream_id}", headers=_auth_headers(), timeout=10
        )
    except requests.RequestException:
        st.error("Failed to delete dream")
        return
    if r.status_code != 204:
        st.error(_error_message(r, "Failed to delete dream"))


def _render_dreams_list():
    st.subheader("Your Dreams & Progress")
    try:
        r = requests.get(
            f"{API_URL}/dreams",
            params={"limit": DEFAULT_DREAMS_PAGE_SIZE, "offset": 0},
            headers=_auth_headers(),
            timeout=10,
        )
    except requests.RequestException:
        st.error("Failed to load dreams")
        return
    if r.status_code == 401:
        _clear_auth_and_rerun()
        return
    if r.status_code != 200:
        st.error(_error_message(r, "Failed to load dreams"))
        return
    dreams = _safe_json(r).get("dreams", [])
    if not dreams:
        st.info("No dreams yet. Start by creating your first dream above!")
        return
    for dream in dreams:
        with st.container(border=True):
            col_title, col_delete = st.columns([6, 1])
            with col_title:
                st.markdown(f"**{dream['title']}**  ·  {_domain_label(dream['domain'])}")
                st.caption(dream["description"])
                st.caption(_progress_caption(dream.get("progress")))
            with col_delete:
                st.button(
                    "Delete",
                    key=f"delete_{dream['id']}",
                    on_click=_delete_dream,
                    args=(dream["id"],),
                )
            for index, step in enumerate(dream.get("steps", [])):
                st.checkbox(
                    f"Step {index + 1}: {step['title']}",
                    value=step["completed"],
                    key=f"step_{step['id']}",
                    help=step["description"],
                    on_change=_toggle_step,
                    args=(step,),
                )


def main():
    if not st.session_state.get(SESSION_ACCESS_TOKEN):
        _render_sign_in()
        return

    if st.sidebar.button("Sign Out"):
        _clear_auth_and_rerun()
        return

    st.title("Dream to Reality Planner")
    st.write("Transform ambitions into actionable steps.")
    _render_dream_form()
    st.divider()
    _render_dreams_list()


if __name__ == "__main__":
    main()
