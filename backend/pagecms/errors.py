from flask import current_app, jsonify
from pagecms.domain.invariants.exceptions import SectionError


def register_error_handlers(app):
    @app.errorhandler(SectionError)
    def handle_section_error(error):
        current_app.logger.info(f"{error.kind}: {error.message}")
        response = jsonify({
            "error": error.kind,
            "message": error.message,
            "details": error.errors,
        })
        response.status_code = error.status_code
        return response
