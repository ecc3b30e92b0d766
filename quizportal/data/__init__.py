"""
Data Management Package
=======================
Import dữ liệu câu hỏi cho Quiz Portal

Modules:
- import_questions: Import câu hỏi + phương án từ JSON
"""

import os

# Đường dẫn đến thư mục data
DATA_DIR = os.path.dirname(os.path.abspath(__file__))

# Bộ câu hỏi mẫu
QUESTIONS_JSON = os.path.join(DATA_DIR, 'questions.json')

__all__ = ['DATA_DIR', 'QUESTIONS_JSON']
