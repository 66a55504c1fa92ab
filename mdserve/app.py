"""
mdserve web application
A Flask application that serves a folder of Markdown files as sanitized HTML
under a URL prefix, falling back to plain static serving for everything else.
"""

import logging
import traceback
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, redirect, request

from mdserve.config import load_config, normalize_prefix
from mdserve.core.filesystem import DirFileSystem
from mdserve.core.handler import MarkdownHandler, MarkdownMiddleware
from mdserve.core.renderer import MarkdownConverter, RenderPipeline
from mdserve.version_info import __version__ as VERSION

logger = logging.getLogger(__name__)


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Build the Flask application.

    In handler mode every path under the prefix is served by the Markdown
    handler. In middleware mode `.md` paths are intercepted before Flask
    routing and the prefix is served by the static file server.
    """
    config = dict(config) if config is not None else load_config()
    prefix = normalize_prefix(config.get('prefix', '/docs/'))
    root = Path(config.get('root', '.')).resolve()

    app = Flask(__name__)
    app.config['MDSERVE'] = dict(config, prefix=prefix, root=str(root))

    fs = DirFileSystem(root)
    pipeline = RenderPipeline(MarkdownConverter(highlight_style=config.get('highlight_style', 'default')))
    handler = MarkdownHandler(prefix, fs, pipeline=pipeline)
    app.extensions['mdserve'] = handler

    if not root.is_dir():
        logger.warning(f"Document root {root} does not exist or is not a directory")

    if config.get('middleware'):
        app.wsgi_app = MarkdownMiddleware(app.wsgi_app, handler)
        serve = handler.fallback.serve
        logger.info(f"Middleware mode: rendering *.md, static files under {prefix} from {root}")
    else:
        serve = handler.serve
        logger.info(f"Serving markdown under {prefix} from {root}")

    def documents(filename=''):
        return serve(request)

    app.add_url_rule(prefix, 'documents', documents, methods=['GET', 'HEAD'])
    app.add_url_rule(f"{prefix}<path:filename>", 'documents', documents, methods=['GET', 'HEAD'])

    if prefix != '/':
        @app.route('/')
        def index():
            return redirect(prefix)

    @app.route('/api/version')
    def get_version():
        return jsonify({'version': VERSION})

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"500 Error: {error}\n{traceback.format_exc()}")
        return "Internal Server Error", 500, {'Content-Type': 'text/plain; charset=utf-8'}

    return app
