import os
from quizportal import create_app
from quizportal.config import config

app = create_app(config[os.getenv('FLASK_CONFIG', 'default')])

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=int(os.getenv('PORT', '3000')))
