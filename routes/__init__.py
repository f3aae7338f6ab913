# Routes package - registers all blueprints with the Flask app

def register_blueprints(app):
    """Register all route blueprints with the Flask app."""
    from .attacks import attacks_bp

    app.register_blueprint(attacks_bp)
