from flask_wtf import FlaskForm
from wtforms import Form, StringField, TextAreaField, BooleanField, PasswordField, SubmitField, FieldList, FormField
from wtforms.fields.numeric import IntegerField
from wtforms.validators import DataRequired, InputRequired, Length, Optional, ValidationError


# ==================== FORM ĐĂNG NHẬP ====================
class LoginForm(FlaskForm):
    """Form đăng nhập"""
    username = StringField('Username', validators=[
        DataRequired(message='Please enter your username')
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='Please enter your password')
    ])
    submit = SubmitField('Log in')


# ==================== FORM ĐĂNG KÝ ====================
class RegisterForm(FlaskForm):
    """Form đăng ký tài khoản"""
    username = StringField('Username', validators=[
        DataRequired(message='Please enter a username'),
        Length(max=80, message='Username must be at most 80 characters')
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='Please enter a password')
    ])
    is_admin = BooleanField('Administrator')
    submit = SubmitField('Register')


# ==================== FORM CÂU HỎI (ADMIN) ====================
class AnswerOptionForm(Form):
    """Một phương án trả lời, checkbox 'on' = đáp án đúng"""
    text = StringField('Answer', validators=[Optional(), Length(max=1000)])
    is_correct = BooleanField('Correct', false_values=('false', '', 'off', '0'))


class QuestionForm(FlaskForm):
    """Form thêm câu hỏi kèm danh sách phương án"""
    question_text = TextAreaField('Question', validators=[
        DataRequired(message='Please enter the question text')
    ])
    answers = FieldList(FormField(AnswerOptionForm))
    submit = SubmitField('Add question')

    def options(self):
        """Các phương án (text, is_correct) theo thứ tự, bỏ qua dòng để trống"""
        return [(entry.form.text.data.strip(), bool(entry.form.is_correct.data))
                for entry in self.answers.entries
                if entry.form.text.data and entry.form.text.data.strip()]


# ==================== FORM NỘP BÀI ====================
class AnswerEntryForm(Form):
    """Một cặp (câu hỏi, đáp án đã chọn)"""
    question_id = IntegerField('Question', validators=[InputRequired()])
    answer_id = IntegerField('Answer', validators=[InputRequired()])


class SubmissionForm(FlaskForm):
    """Bài làm: danh sách có thứ tự các cặp question_id/answer_id"""
    answers = FieldList(FormField(AnswerEntryForm))

    def validate_answers(self, field):
        if not field.entries:
            raise ValidationError('No answers submitted')

        seen = set()
        for entry in field.entries:
            question_id = entry.form.question_id.data
            if question_id in seen:
                raise ValidationError(f'Question {question_id} answered more than once')
            seen.add(question_id)

    def pairs(self):
        """Danh sách (question_id, answer_id) theo thứ tự gửi lên"""
        return [(entry.form.question_id.data, entry.form.answer_id.data)
                for entry in self.answers.entries]


class ResetQuizForm(FlaskForm):
    """Form xác nhận làm lại bài (chỉ mang CSRF token)"""
    submit = SubmitField('Retake quiz')
