from flask import Blueprint, render_template, redirect, url_for, current_app, flash
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from quizportal import db
from quizportal.models import Question, UserAnswer, has_taken_quiz, get_highest_score
from quizportal.forms import SubmissionForm, ResetQuizForm
from quizportal.quiz.scoring import submit_quiz, SubmissionError

quiz_bp = Blueprint('quiz', __name__)


# ==================== DASHBOARD ====================
@quiz_bp.route('/user-dashboard')
@login_required
def user_dashboard():
    """Hiện điểm nếu đã làm bài, ngược lại hiện bộ câu hỏi"""
    user_id = current_user.user_id

    try:
        has_taken = has_taken_quiz(user_id)
        highest_score = 0
        questions = []

        if has_taken:
            highest_score = get_highest_score(user_id)
        else:
            # Chỉ lấy câu hỏi có ít nhất 1 phương án, theo thứ tự question_id
            questions = (Question.query
                         .options(selectinload(Question.answers))
                         .filter(Question.answers.any())
                         .order_by(Question.question_id)
                         .all())
    except SQLAlchemyError as e:
        current_app.logger.error(f"Error loading user dashboard: {e}")
        return 'Failed to load user dashboard', 500

    return render_template('quiz/user_dashboard.html',
                           has_taken_quiz=has_taken,
                           highest_score=highest_score,
                           questions=questions,
                           submission_form=SubmissionForm(formdata=None),
                           reset_form=ResetQuizForm(formdata=None))


# ==================== NỘP BÀI ====================
@quiz_bp.route('/submit-answers', methods=['POST'])
@login_required
def submit_answers():
    """Chấm bài và cập nhật điểm cao nhất"""
    form = SubmissionForm()

    if not form.validate_on_submit():
        current_app.logger.error(f"Invalid answer submission: {form.errors}")
        return 'Invalid answer submission', 400

    try:
        score = submit_quiz(current_user.user_id, form.pairs())
    except (SubmissionError, SQLAlchemyError) as e:
        current_app.logger.error(f"Error in /submit-answers route: {e}")
        return 'Error submitting answers', 500

    flash(f'Your score: {score}', 'success')
    return redirect(url_for('quiz.user_dashboard'))


# ==================== LÀM LẠI ====================
@quiz_bp.route('/reset-quiz', methods=['POST'])
@login_required
def reset_quiz():
    """Xóa toàn bộ câu trả lời để làm lại, KHÔNG đụng tới điểm cao nhất"""
    form = ResetQuizForm()
    if not form.validate_on_submit():
        return 'Invalid reset request', 400

    try:
        deleted = UserAnswer.query.filter_by(user_id=current_user.user_id).delete()
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error resetting quiz: {e}")
        return 'Failed to reset quiz', 500

    current_app.logger.info(f"User {current_user.user_id} reset quiz ({deleted} answers removed)")
    return redirect(url_for('quiz.user_dashboard'))
