from werkzeug.security import generate_password_hash, check_password_hash
from quizportal import db
from datetime import datetime


# ==================== USER MODEL ====================
class User(db.Model):
    """Model người dùng (thí sinh hoặc admin)"""
    __tablename__ = 'users'

    user_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column('password', db.String(255), nullable=False)
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    score = db.relationship('UserScore', backref='user', uselist=False, lazy=True)

    def __repr__(self):
        return f'<User {self.username}>'

    def set_password(self, password):
        """Hash (có salt) và lưu mật khẩu"""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Kiểm tra mật khẩu"""
        return check_password_hash(self.password_hash, password)


# ==================== QUESTION MODEL ====================
class Question(db.Model):
    """Câu hỏi trắc nghiệm"""
    __tablename__ = 'questions'

    question_id = db.Column(db.Integer, primary_key=True)
    question_text = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    answers = db.relationship('Answer', backref='question', lazy=True,
                              order_by='Answer.answer_id',
                              cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Question {self.question_text[:50]}>'


# ==================== ANSWER MODEL ====================
class Answer(db.Model):
    """Phương án trả lời của một câu hỏi"""
    __tablename__ = 'answers'

    answer_id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.question_id'), nullable=False, index=True)
    answer_text = db.Column(db.Text, nullable=False)
    is_correct = db.Column(db.Boolean, nullable=False, default=False)

    def __repr__(self):
        return f'<Answer {self.answer_id} of Q{self.question_id}>'


# ==================== USER ANSWER MODEL ====================
class UserAnswer(db.Model):
    """Câu trả lời user đã chọn trong lần làm bài hiện tại"""
    __tablename__ = 'user_answers'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    # Kiểm tra ở tầng scoring, không có FK
    question_id = db.Column(db.Integer, nullable=False)
    selected_answer = db.Column(db.Integer, nullable=False)
    is_correct = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<UserAnswer user={self.user_id} Q{self.question_id}={self.selected_answer}>'


# ==================== USER SCORE MODEL ====================
class UserScore(db.Model):
    """Điểm cao nhất của user, chỉ tăng không giảm"""
    __tablename__ = 'user_scores'

    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), primary_key=True)
    highest_score = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<UserScore user={self.user_id} best={self.highest_score}>'


# ==================== HELPER FUNCTIONS ====================
def has_taken_quiz(user_id):
    """User đã có câu trả lời được ghi nhận hay chưa"""
    return db.session.query(
        UserAnswer.query.filter_by(user_id=user_id).exists()
    ).scalar()


def get_highest_score(user_id):
    """Điểm cao nhất của user, mặc định 0"""
    score = db.session.get(UserScore, user_id)
    return score.highest_score if score else 0
