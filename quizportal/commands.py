import click
from quizportal import db


def register_commands(app):
    """Đăng ký các lệnh `flask ...` cho app"""

    @app.cli.command('init-db')
    def init_db():
        """Tạo toàn bộ bảng (môi trường chưa dùng migration)"""
        db.create_all()
        click.echo('✅ Database tables created')

    @app.cli.command('import-questions')
    @click.argument('json_file', required=False, type=click.Path(dir_okay=False))
    def import_questions(json_file):
        """Import câu hỏi + phương án từ file JSON"""
        from quizportal.data.import_questions import QuestionImporter, QuestionImportError

        try:
            stats = QuestionImporter(json_file).run()
        except QuestionImportError as e:
            raise click.ClickException(str(e))

        if stats['errors']:
            raise click.ClickException(f"{stats['errors']} question(s) failed to import")
