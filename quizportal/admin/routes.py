from flask import Blueprint, render_template, flash, redirect, url_for, current_app
from flask_login import login_required
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from quizportal import db
from quizportal.models import User, UserScore, Question, Answer
from quizportal.forms import QuestionForm
from quizportal.decorators import admin_required

admin_bp = Blueprint('admin', __name__)


def get_user_scores():
    """User thường kèm điểm cao nhất (mặc định 0), sắp theo username"""
    return (db.session.query(
                User.username,
                func.coalesce(UserScore.highest_score, 0).label('highest_score'),
                UserScore.updated_at.label('score_updated_at'))
            .outerjoin(UserScore, User.user_id == UserScore.user_id)
            .filter(User.is_admin.is_(False))
            .order_by(User.username)
            .all())


# ==================== DASHBOARD ====================
@admin_bp.route('', methods=['GET'])
@login_required
@admin_required
def dashboard():
    """Bảng điểm của tất cả user thường"""
    try:
        scores = get_user_scores()
    except SQLAlchemyError as e:
        current_app.logger.error(f"Error fetching user scores: {e}")
        return 'Failed to load user scores', 500

    return render_template('admin/admin_dashboard.html',
                           scores=scores,
                           form=QuestionForm(formdata=None))


# ==================== THÊM CÂU HỎI ====================
@admin_bp.route('/questions', methods=['POST'])
@login_required
@admin_required
def add_question():
    """Thêm câu hỏi và các phương án trả lời trong một transaction"""
    form = QuestionForm()

    if not form.validate_on_submit():
        current_app.logger.warning(f"Invalid question form: {form.errors}")
        return 'Invalid question', 400

    question = Question(question_text=form.question_text.data)
    for text, is_correct in form.options():
        question.answers.append(Answer(answer_text=text, is_correct=is_correct))

    try:
        db.session.add(question)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error adding question: {e}")
        return 'Failed to add question', 500

    current_app.logger.info(
        f"Added question {question.question_id} with {len(question.answers)} answers"
    )
    flash('Question added.', 'success')
    return redirect(url_for('admin.dashboard'))
