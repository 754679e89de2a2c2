"""
Launcher for the ftpctl Streamlit console.

Replaces the current process with `streamlit run ftpctl/ui/app.py`.
Host and port for Streamlit come from FTPCTL_UI_HOST / FTPCTL_UI_PORT.
"""

import logging
import os
import subprocess
import sys

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("ftpctl.ui")

APP_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "app.py")


def build_command(host: str, port: int):
    return [
        'streamlit',
        'run',
        APP_PATH,
        f'--server.port={port}',
        f'--server.address={host}',
        '--logger.level=info',
        '--client.showErrorDetails=true'
    ]


def main():
    host = os.getenv('FTPCTL_UI_HOST', '127.0.0.1')
    port = int(os.getenv('FTPCTL_UI_PORT', 8501))
    os.environ['STREAMLIT_TELEMETRY_ENABLED'] = 'false'

    cmd = build_command(host, port)
    logger.info(f"Starting Streamlit console on {host}:{port}...")
    try:
        os.execvp(cmd[0], cmd)
    except OSError as e:
        logger.error(f"Failed to exec Streamlit: {e}")
        # Fallback to subprocess.run for better diagnostics
        try:
            subprocess.run(cmd, check=True)
        except subprocess.CalledProcessError as e2:
            logger.error(f"Streamlit exited with error code {e2.returncode}")
            sys.exit(e2.returncode)
        except OSError as e2:
            logger.error(f"Failed to start Streamlit: {e2}")
            sys.exit(1)


if __name__ == '__main__':
    main()
