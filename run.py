import os
from dominica_news import create_app, db
from dominica_news.models import User, Category, Article, Image

# Config mode from the environment (FLASK_ENV on the host, or FLASK_CONFIG)
config_name = os.getenv('FLASK_ENV') or os.getenv('FLASK_CONFIG') or 'default'
if config_name in ('development', 'dev'):
    config_name = 'development'

app = create_app(config_name)


@app.shell_context_processor
def make_shell_context():
    """
    Objects pre-imported in 'flask shell'.
    """
    return dict(
        db=db,
        app=app,
        User=User,
        Category=Category,
        Article=Article,
        Image=Image,
    )


if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    print("-------------------------------------------------------")
    print("   Dominica News API")
    print(f"   Listening on 0.0.0.0:{port}")
    print("-------------------------------------------------------")
    app.run(host='0.0.0.0', port=port)
