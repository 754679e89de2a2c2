import sys
import os

# Streamlit runs this file as a script; make `import ftpctl` resolve from a source checkout
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from datetime import datetime
import logging

from ftpctl.config import ClientConfig
from ftpctl.core.connection import open_client
from ftpctl.core.errors import FTPCommandError, FTPError
from ftpctl.ui.levenstein import get_suggestion

import streamlit as st

logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


st.set_page_config(page_title="ftpctl", layout="wide")

if "conn" not in st.session_state:
    st.session_state["conn"] = None
    st.session_state["handler"] = None


def disconnect():
    conn = st.session_state.get("conn")
    if conn:
        conn.disconnect()
    st.session_state["conn"] = None
    st.session_state["handler"] = None


# --- UI ----------------------------------------------------------------------
st.title("ftpctl — control channel console")

with st.sidebar:
    st.header("Connection")
    host = st.text_input("Host", value=os.getenv("FTP_HOST", "127.0.0.1"))
    port = st.number_input("Port", min_value=1, max_value=65535, value=int(os.getenv("FTP_PORT", 21)))
    user = st.text_input("User", value=os.getenv("FTP_USER", "anonymous"))
    password = st.text_input("Password", type="password", value=os.getenv("FTP_PASS", ""))
    timeout = st.number_input("Timeout (s)", min_value=1.0, max_value=60.0, value=10.0)

    if st.button("Connect"):
        disconnect()
        try:
            logger.info(f"[UI] Connect button clicked: {host}:{port}")
            config = ClientConfig(host, int(port), user, password, float(timeout))
            conn, handler = open_client(config)
            st.session_state["conn"] = conn
            st.session_state["handler"] = handler
            conn.wait_until_idle(timeout=float(timeout))
            st.success(f"Connected to {host}:{port}")
        except (FTPError, ValueError) as e:
            logger.error(f"[UI] Connection failed: {e}")
            st.error(f"Connection failed: {e}")

    if st.button("Disconnect"):
        logger.info("[UI] Disconnect button clicked")
        disconnect()
        st.info("Disconnected")

    conn = st.session_state.get("conn")
    if conn is not None:
        session = conn.session
        st.caption(f"connected={session.connected} busy={session.busy} queued={len(session.commands)}")
        if session.login_state is not None:
            st.caption(f"login: {session.login_state.value}")
        if conn.last_error is not None:
            st.error(str(conn.last_error))


col1, col2 = st.columns([3, 1])

with col1:
    st.subheader("Terminal")
    cmd = st.text_input("Command", placeholder="e.g. CWD pub", key="cmd_input")
    binary = st.checkbox("Binary transfers (TYPE I)", value=True)
    download_path = st.text_input("Download (PASV + RETR)", placeholder="remote/path.bin")
    cmd_run = st.button("Run")

    if cmd_run:
        handler = st.session_state.get("handler")
        conn = st.session_state.get("conn")
        if not handler:
            st.error("Not connected. Connect first.")
        else:
            try:
                if cmd:
                    logger.info(f"[UI] Command queued: {cmd}")
                    handler.raw(cmd)
                if download_path:
                    handler.set_binary(binary)
                    handler.download(download_path)
                with st.spinner("Waiting for the server..."):
                    done = conn.wait_until_idle(timeout=float(timeout))
                if not done:
                    st.warning("Still waiting for a reply")
                channel = conn.session.data_channel
                if download_path and channel is not None:
                    data = channel.wait(float(timeout))
                    st.download_button("Save file", data=data, file_name=download_path.rsplit("/", 1)[-1])
            except FTPCommandError as e:
                verb = cmd.split()[0] if cmd.split() else ""
                st.error(str(e))
                suggestion = get_suggestion(verb)
                if suggestion:
                    st.write(f"Try with {suggestion}")
            except (FTPError, OSError) as e:
                logger.error(f"[UI] Command error: {e}")
                st.error(f"Error: {e}")

with col2:
    st.subheader("History")
    handler = st.session_state.get("handler")
    if handler is None:
        st.info("No history: not connected")
    else:
        if st.button("Clear History"):
            handler.clear_history()
            st.rerun()
        for entry in reversed(handler.get_history()[-100:]):
            t = entry.get("time")
            time_str = t.isoformat() if isinstance(t, datetime) else str(t)
            with st.expander(f"{time_str} — {entry.get('command')}"):
                parsed = entry.get("parsed")
                if parsed:
                    st.write(f"Code: {parsed.code}")
                    st.write(f"Type: {parsed.type}")
                st.code(entry.get("raw"))
                if entry.get("error"):
                    st.error("This entry had an error")


st.markdown("---")
st.caption("ftpctl Streamlit UI — command queue, replies and login state.")
