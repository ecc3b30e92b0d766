"""
Import câu hỏi từ JSON
======================
Chạy từ thư mục gốc: flask --app run import-questions [PATH]

Định dạng file:
    {"questions": [{"question_text": "...",
                    "answers": [{"text": "...", "is_correct": true}, ...]}]}

Tính năng:
- Bỏ qua câu hỏi đã tồn tại (trùng question_text)
- Bỏ qua câu hỏi thiếu nội dung hoặc không có phương án
- Mỗi câu hỏi commit riêng, lỗi một câu không ảnh hưởng câu khác
"""

import json
import os

import click
from sqlalchemy.exc import SQLAlchemyError

from quizportal import db
from quizportal.models import Question, Answer
from quizportal.data import QUESTIONS_JSON


class QuestionImportError(Exception):
    """Không đọc được file dữ liệu"""


class QuestionImporter:
    """Class xử lý import câu hỏi (cần app context)"""

    def __init__(self, json_file=None):
        self.json_file = json_file or QUESTIONS_JSON
        self.stats = {
            'questions_created': 0,
            'answers_created': 0,
            'skipped': 0,
            'errors': 0
        }

    def load_json_data(self):
        """Đọc dữ liệu từ file JSON"""
        if not os.path.exists(self.json_file):
            raise QuestionImportError(f"File not found: {self.json_file}")

        try:
            with open(self.json_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise QuestionImportError(f"Invalid JSON at line {e.lineno}: {e.msg}") from e

        if not isinstance(data, dict) or not isinstance(data.get('questions'), list):
            raise QuestionImportError("Expected an object with a 'questions' list")
        return data

    def import_questions(self, questions_data):
        """Import từng câu hỏi kèm phương án"""
        existing = {text for (text,) in db.session.query(Question.question_text)}

        for idx, q_data in enumerate(questions_data, 1):
            text = (q_data.get('question_text') or '').strip()
            answers = [a for a in q_data.get('answers') or [] if (a.get('text') or '').strip()]

            if not text or not answers:
                click.echo(f"⚠️  [{idx}] Skipped: missing question text or answers")
                self.stats['skipped'] += 1
                continue

            if text in existing:
                click.echo(f"⚠️  [{idx}] Skipped: already exists")
                self.stats['skipped'] += 1
                continue

            question = Question(question_text=text)
            for a_data in answers:
                question.answers.append(Answer(
                    answer_text=a_data['text'].strip(),
                    is_correct=bool(a_data.get('is_correct', False))
                ))

            try:
                db.session.add(question)
                db.session.commit()
            except SQLAlchemyError as e:
                db.session.rollback()
                click.echo(f"❌ [{idx}] Error: {e}")
                self.stats['errors'] += 1
                continue

            existing.add(text)
            self.stats['questions_created'] += 1
            self.stats['answers_created'] += len(answers)
            click.echo(f"✅ [{idx}] Created question {question.question_id} ({len(answers)} answers)")

    def print_summary(self):
        """In tổng kết"""
        click.echo("=" * 50)
        click.echo(f"Questions created: {self.stats['questions_created']}")
        click.echo(f"Answers created:   {self.stats['answers_created']}")
        click.echo(f"Skipped:           {self.stats['skipped']}")
        click.echo(f"Errors:            {self.stats['errors']}")
        click.echo("=" * 50)

    def run(self):
        """Chạy toàn bộ quá trình import, trả về stats"""
        data = self.load_json_data()
        self.import_questions(data['questions'])
        self.print_summary()
        return self.stats
