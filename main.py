"""
Main entry point for the resume enhancer web UI.
"""

from cvenhancer.config.settings import get_settings
from cvenhancer.utils.logger import setup_logging, get_logger
from cvenhancer.web import create_app


def main():
    """
    Main application entry point with web UI.
    """
    settings = get_settings()
    setup_logging(level=settings.log_level, log_file=settings.log_file)
    logger = get_logger(__name__)

    app = create_app(settings)

    logger.info("=" * 70)
    logger.info("📄 CV ENHANCER - WEB UI")
    logger.info("=" * 70)
    logger.info(f"🌐 Opening web UI at http://{settings.host}:{settings.port}")
    logger.info("   Press Ctrl+C to stop")
    app.run(debug=settings.debug, host=settings.host, port=settings.port, use_reloader=False)


if __name__ == "__main__":
    main()
