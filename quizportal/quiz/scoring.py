"""
Chấm điểm bài làm
=================

Toàn bộ một lần nộp bài chạy trong một transaction: chỉ cần một cặp
(câu hỏi, đáp án) không hợp lệ là rollback, không ghi UserAnswer nào.

Điểm cao nhất được upsert có điều kiện ngay trong SQL
(ON CONFLICT ... DO UPDATE ... WHERE highest_score < mới) nên hai lần nộp
chạy song song không thể làm giảm điểm đã lưu.
"""

from datetime import datetime

from flask import current_app
from sqlalchemy.dialects import postgresql, sqlite

from quizportal import db
from quizportal.models import Question, Answer, UserAnswer, UserScore, get_highest_score


class SubmissionError(Exception):
    """Bài nộp tham chiếu câu hỏi/đáp án không tồn tại hoặc không khớp"""


def grade_answers(user_id, pairs):
    """
    Kiểm tra và chấm từng cặp (question_id, answer_id), thêm UserAnswer vào session.

    Returns:
        int: Số câu đúng

    Raises:
        SubmissionError: nếu có cặp không hợp lệ
    """
    valid_question_ids = {row.question_id for row in db.session.query(Question.question_id)}

    answer_ids = [answer_id for _, answer_id in pairs if answer_id]
    answers = {
        answer.answer_id: answer
        for answer in Answer.query.filter(Answer.answer_id.in_(answer_ids)).all()
    } if answer_ids else {}

    score = 0
    for question_id, answer_id in pairs:
        if question_id not in valid_question_ids:
            current_app.logger.error(f"Invalid question ID submitted: {question_id}")
            raise SubmissionError(f"Invalid question ID: {question_id}")

        if not answer_id:
            current_app.logger.error(f"Answer ID missing for question {question_id}")
            raise SubmissionError(f"Answer ID missing for question {question_id}")

        answer = answers.get(answer_id)
        if answer is None:
            current_app.logger.error(f"Answer with ID {answer_id} does not exist in the database")
            raise SubmissionError(f"Invalid answer ID {answer_id}")

        if answer.question_id != question_id:
            current_app.logger.error(
                f"Answer {answer_id} belongs to question {answer.question_id}, not {question_id}"
            )
            raise SubmissionError(f"Answer ID {answer_id} does not belong to question {question_id}")

        if answer.is_correct:
            score += 1

        # Ghi lại mọi câu trả lời, đúng hay sai
        db.session.add(UserAnswer(
            user_id=user_id,
            question_id=question_id,
            selected_answer=answer_id,
            is_correct=answer.is_correct
        ))

    return score


# Chỉ hai dialect này có INSERT ... ON CONFLICT
UPSERT_INSERTS = {
    'postgresql': postgresql.insert,
    'sqlite': sqlite.insert,
}


def _guarded_upsert(dialect_name, user_id, score):
    """INSERT ... ON CONFLICT DO UPDATE chỉ khi điểm mới lớn hơn"""
    insert = UPSERT_INSERTS.get(dialect_name)
    if insert is None:
        raise RuntimeError(f"Unsupported database dialect for score upsert: {dialect_name}")
    table = UserScore.__table__
    stmt = insert(table).values(user_id=user_id, highest_score=score, updated_at=datetime.utcnow())
    return stmt.on_conflict_do_update(
        index_elements=[table.c.user_id],
        set_={
            'highest_score': stmt.excluded.highest_score,
            'updated_at': stmt.excluded.updated_at,
        },
        where=table.c.highest_score < stmt.excluded.highest_score
    )


def record_best_score(user_id, score):
    """
    Lưu điểm nếu cao hơn điểm tốt nhất hiện có.

    Returns:
        bool: True nếu điểm mới cao hơn điểm đã lưu lúc đọc
    """
    if score <= get_highest_score(user_id):
        return False

    db.session.execute(_guarded_upsert(db.engine.dialect.name, user_id, score))
    return True


def submit_quiz(user_id, pairs):
    """
    Chấm bài, lưu câu trả lời và cập nhật điểm cao nhất trong một transaction.

    Args:
        user_id (int): user đang nộp bài
        pairs (list): các cặp (question_id, answer_id) theo thứ tự gửi lên

    Returns:
        int: điểm của lần nộp này

    Raises:
        SubmissionError, SQLAlchemyError: đã rollback, không có gì được lưu
    """
    try:
        score = grade_answers(user_id, pairs)
        db.session.flush()
        record_best_score(user_id, score)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(f"User {user_id} submitted {len(pairs)} answers, score {score}")
    return score
