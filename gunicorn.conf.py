"""
Gunicorn configuration file cho Quiz Portal
Đặt file này cùng cấp với run.py: gunicorn run:app
"""

import os

# ==================== WORKER CONFIGURATION ====================
# Mỗi request chạy độc lập trong 1 worker/thread, không có lock giữa các request
workers = int(os.environ.get('WEB_CONCURRENCY', '2'))
threads = 2
worker_class = 'gthread'

# ==================== TIMEOUT ====================
timeout = 30
graceful_timeout = 30
keepalive = 5

# ==================== MEMORY MANAGEMENT ====================
# Restart worker sau N requests để tránh memory leak
max_requests = 1000
max_requests_jitter = 50

# ==================== PRELOAD ====================
# create_app() dừng ngay nếu thiếu SESSION_SECRET/JWT_SECRET
preload_app = True

# ==================== BINDING ====================
bind = f"0.0.0.0:{os.environ.get('PORT', '3000')}"

# ==================== LOGGING ====================
accesslog = '-'  # Log to stdout
errorlog = '-'   # Log to stderr
loglevel = 'info'


# ==================== HOOKS ====================
def on_starting(server):
    """Chạy khi Gunicorn khởi động"""
    print("🚀 [Gunicorn] Starting Quiz Portal with:")
    print(f"   - Workers: {workers}")
    print(f"   - Threads/worker: {threads}")
    print(f"   - Timeout: {timeout}s")
