from functools import wraps
from flask import abort, current_app, request
from flask_login import current_user


def admin_required(f):
    """
    Chỉ cho phép admin truy cập.

    Đặt SAU @login_required: request chưa đăng nhập đã bị chuyển về /login
    trước khi tới bước kiểm tra này.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_admin:
            current_app.logger.warning(
                f"Admin access denied for user {current_user.get_id()} on {request.path}"
            )
            abort(403)
        return f(*args, **kwargs)
    return decorated_function
