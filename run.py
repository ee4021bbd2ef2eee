# run.py
# This script launches the Flask application.
# Because the project is installed in editable mode via pyproject.toml,
# Python knows where to find the 'grid_editor' package without any path manipulation.

import argparse
import logging

from grid_editor.app import app

# --- SETUP LOGGING ---
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Run the grid editor API server.")
    parser.add_argument('--host', default='0.0.0.0', help="Interface to bind (default: 0.0.0.0).")
    parser.add_argument('--port', type=int, default=5001, help="Port to listen on (default: 5001).")
    parser.add_argument('--debug', action='store_true', help="Enable auto-reloading and the Flask debugger.")
    args = parser.parse_args()
    app.run(host=args.host, port=args.port, debug=args.debug)
