from nikki import create_app

# gunicorn 等からは app:app で起動する
app = create_app()

if __name__ == '__main__':
    app.run(debug=False)
