"""
Gateway entry point for running as module: python -m gateway
"""
import atexit
import os

from gateway.env_loader import ensure_env_loaded

ensure_env_loaded()

from gateway.app import create_app  # noqa: E402

if __name__ == '__main__':
    app = create_app()
    atexit.register(app.extensions["placeholder_dump"].shutdown)
    port = int(os.getenv('PORT', 5000))
    host = os.getenv('HOST', '127.0.0.1')
    debug_mode = os.getenv('FLASK_ENV', 'production').lower() == 'development'
    app.run(debug=debug_mode, host=host, port=port, use_reloader=False, threaded=True)
