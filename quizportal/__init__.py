from flask import Flask, current_app, session
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_compress import Compress
from flask_session import Session
from cachelib import FileSystemCache
from quizportal.config import Config
import pytz

# Khởi tạo extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
compress = Compress()
server_session = Session()


def create_app(config_class=Config):
    """Factory function để tạo Flask app"""
    missing = config_class.missing_secrets()
    if missing:
        raise RuntimeError(f"Missing required configuration: {', '.join(missing)}")

    app = Flask(__name__)

    # ==================== CONFIG ====================
    app.config.from_object(config_class)

    # ==================== SERVER-SIDE SESSION ====================
    if 'SESSION_CACHELIB' not in app.config:
        app.config['SESSION_CACHELIB'] = FileSystemCache(app.config['SESSION_CACHE_DIR'], threshold=500)
    server_session.init_app(app)

    # ==================== INIT EXTENSIONS ====================
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    compress.init_app(app)

    # ==================== FLASK-LOGIN ====================
    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Please log in to access this page.'
    login_manager.login_message_category = 'warning'

    @login_manager.request_loader
    def load_identity(req):
        """Giải mã session token thành Identity cho current_user"""
        from quizportal.auth_util import verify_session_token, SessionTokenError

        token = session.get('token')
        if not token:
            return None
        try:
            return verify_session_token(token)
        except SessionTokenError as e:
            current_app.logger.warning(f"Rejected session token on {req.path}: {e}")
            return None

    # ==================== REGISTER BLUEPRINTS ====================
    from quizportal.auth.routes import auth_bp
    from quizportal.quiz import quiz_bp
    from quizportal.admin.routes import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(quiz_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')

    # ==================== CLI ====================
    from quizportal.commands import register_commands
    register_commands(app)

    # Khởi tạo cấu hình logging, v.v.
    config_class.init_app(app)

    # ==================== CONTEXT PROCESSOR ====================
    @app.context_processor
    def inject_globals():
        from datetime import datetime
        return {
            'site_name': app.config.get('SITE_NAME', 'Quiz Portal'),
            'current_year': datetime.now().year,
        }

    # ==================== TIMEZONE FILTERS ====================
    @app.template_filter('local_datetime')
    def local_datetime_filter(dt, format='%d/%m/%Y %H:%M'):
        """Chuyển UTC datetime sang múi giờ hiển thị (APP_TIMEZONE)"""
        if dt is None:
            return ''
        if dt.tzinfo is None:
            dt = pytz.utc.localize(dt)
        local_tz = pytz.timezone(app.config['APP_TIMEZONE'])
        return dt.astimezone(local_tz).strftime(format)

    # ==================== ERROR HANDLERS ====================
    @app.errorhandler(403)
    def forbidden_error(error):
        from flask import render_template
        return render_template('403.html'), 403

    @app.errorhandler(404)
    def not_found_error(error):
        from flask import render_template
        return render_template('404.html'), 404

    @app.errorhandler(500)
    def internal_error(error):
        from flask import render_template
        db.session.rollback()
        return render_template('500.html'), 500

    # ==================== AFTER/TEARDOWN ====================
    @app.after_request
    def after_request(response):
        """Thêm security headers cơ bản"""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        return response

    @app.teardown_appcontext
    def shutdown_session(exception=None):
        """Đảm bảo đóng session sau mỗi request"""
        db.session.remove()

    return app
