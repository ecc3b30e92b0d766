import os
from datetime import timedelta
from cachelib import SimpleCache
from dotenv import load_dotenv

# Load biến môi trường từ file .env
load_dotenv()


class Config:
    """Cấu hình chung cho Quiz Portal"""

    # ==================== CƠ BẢN ====================
    # Không có giá trị mặc định: thiếu secret thì create_app() sẽ dừng
    SECRET_KEY = os.environ.get('SESSION_SECRET') or os.environ.get('SECRET_KEY')

    # ==================== SESSION TOKEN (JWT) ====================
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET')
    JWT_ALGORITHM = 'HS256'

    # Các secret bắt buộc phải có khi khởi động
    REQUIRED_SECRETS = ('SECRET_KEY', 'JWT_SECRET_KEY')

    # ==================== DATABASE ====================
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
                              'sqlite:///' + os.path.join(os.path.abspath(os.path.dirname(__file__)), '../quizportal.db')

    # Fix lỗi với PostgreSQL URL kiểu cũ (Heroku/Render)
    if SQLALCHEMY_DATABASE_URI and SQLALCHEMY_DATABASE_URI.startswith('postgres://'):
        SQLALCHEMY_DATABASE_URI = SQLALCHEMY_DATABASE_URI.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,  # Kiểm tra connection trước khi dùng
    }

    # ==================== SERVER-SIDE SESSION (Flask-Session) ====================
    # Cookie chỉ chứa session id, token nằm trong store phía server
    SESSION_TYPE = 'cachelib'
    SESSION_CACHE_DIR = os.environ.get('SESSION_CACHE_DIR') or \
                        os.path.join(os.path.abspath(os.path.dirname(__file__)), '../flask_session')
    SESSION_PERMANENT = True
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)

    # ==================== SESSION COOKIE ====================
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # ==================== HIỂN THỊ ====================
    SITE_NAME = 'Quiz Portal'
    APP_TIMEZONE = os.environ.get('APP_TIMEZONE') or 'Asia/Ho_Chi_Minh'

    # ==================== FLASK-COMPRESS ====================
    COMPRESS_MIMETYPES = [
        'text/html', 'text/css', 'application/json', 'application/javascript'
    ]
    COMPRESS_LEVEL = 6
    COMPRESS_MIN_SIZE = 500  # Chỉ nén response > 500 bytes

    @classmethod
    def missing_secrets(cls):
        """Danh sách secret chưa được cấu hình"""
        return [name for name in cls.REQUIRED_SECRETS if not getattr(cls, name, None)]

    @staticmethod
    def init_app(app):
        """Khởi tạo cấu hình cho app"""
        import logging
        from logging.handlers import RotatingFileHandler

        if not app.debug:
            # File handler với rotation để tránh log quá lớn
            if not os.path.exists('logs'):
                os.mkdir('logs')
            file_handler = RotatingFileHandler(
                'logs/quizportal.log',
                maxBytes=1024 * 1024,  # 1MB
                backupCount=3
            )
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
            ))
            file_handler.setLevel(logging.INFO)
            app.logger.addHandler(file_handler)
            app.logger.setLevel(logging.INFO)
            app.logger.info('Quiz Portal startup')


class DevelopmentConfig(Config):
    """Cấu hình cho môi trường development"""
    DEBUG = True
    SQLALCHEMY_ECHO = True  # Log tất cả SQL queries


class ProductionConfig(Config):
    """Cấu hình cho production"""
    DEBUG = False
    SQLALCHEMY_ECHO = False
    SESSION_COOKIE_SECURE = True

    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 3,
        'pool_recycle': 300,  # Recycle connection sau 5 phút
        'pool_pre_ping': True,
        'max_overflow': 1,
        'pool_timeout': 10,
    }


class TestingConfig(Config):
    """Cấu hình cho pytest"""
    TESTING = True
    SECRET_KEY = 'test-session-secret'
    JWT_SECRET_KEY = 'test-jwt-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    # Session giữ trong bộ nhớ, không ghi file khi test
    SESSION_CACHELIB = SimpleCache(threshold=10000)

    @staticmethod
    def init_app(app):
        # Không ghi log ra file khi test
        pass


# Chọn config dựa trên environment
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': Config
}
