"""
Quiz Module - Làm bài trắc nghiệm và chấm điểm

Chức năng:
- Dashboard: chưa làm thì hiện câu hỏi, đã làm thì hiện điểm cao nhất
- Nộp bài: chấm điểm, lưu câu trả lời, cập nhật điểm cao nhất
- Làm lại: xóa câu trả lời cũ, giữ nguyên điểm cao nhất
"""

from quizportal.quiz.routes import quiz_bp

__all__ = ['quiz_bp']
