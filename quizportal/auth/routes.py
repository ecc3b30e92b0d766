from flask import Blueprint, render_template, flash, redirect, url_for, current_app, session
from flask_login import current_user
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from quizportal import db
from quizportal.models import User
from quizportal.forms import LoginForm, RegisterForm
from quizportal.auth_util import create_session_token

auth_bp = Blueprint('auth', __name__)


def _dashboard_for(identity):
    """Admin → /admin, user thường → /user-dashboard"""
    if identity.is_admin:
        return url_for('admin.dashboard')
    return url_for('quiz.user_dashboard')


# ==================== TRANG CHỦ ====================
@auth_bp.route('/')
def index():
    return redirect(url_for('auth.login'))


# ==================== ĐĂNG KÝ ====================
@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    """Tạo tài khoản mới, mật khẩu được hash có salt"""
    form = RegisterForm()

    if not form.is_submitted():
        return render_template('auth/register.html', form=form)

    if not form.validate():
        return render_template('auth/register.html', form=form), 400

    user = User(username=form.username.data, is_admin=bool(form.is_admin.data))
    user.set_password(form.password.data)

    try:
        db.session.add(user)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        current_app.logger.info(f"Registration rejected, username taken: {form.username.data}")
        flash('Username already exists', 'danger')
        return render_template('auth/register.html', form=form), 400
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"User registration failed: {e}")
        return 'User registration failed', 500

    flash('Registration successful, please log in.', 'success')
    return redirect(url_for('auth.login'))


# ==================== ĐĂNG NHẬP ====================
@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Xác thực và lưu session token vào session"""
    form = LoginForm()

    if not form.is_submitted():
        if current_user.is_authenticated:
            return redirect(_dashboard_for(current_user))
        return render_template('auth/login.html', form=form)

    if not form.validate():
        return render_template('auth/login.html', form=form), 400

    try:
        user = User.query.filter_by(username=form.username.data).first()
    except SQLAlchemyError as e:
        current_app.logger.error(f"Login error: {e}")
        return 'Login failed', 500

    # Cùng một phản hồi cho sai username và sai mật khẩu
    if user is None or not user.check_password(form.password.data):
        flash('Invalid credentials', 'danger')
        return render_template('auth/login.html', form=form), 401

    session['token'] = create_session_token(user.user_id, user.is_admin)
    current_app.logger.info(f"User {user.username} logged in")

    if user.is_admin:
        return redirect(url_for('admin.dashboard'))
    return redirect(url_for('quiz.user_dashboard'))


# ==================== ĐĂNG XUẤT ====================
@auth_bp.route('/logout')
def logout():
    """
    Hủy session phía server.

    Flask-Session xóa bản ghi trong store khi lưu session rỗng ở cuối request;
    lỗi của store khi đó đi qua error handler 500 của app.
    """
    session.clear()
    return redirect(url_for('auth.login'))
