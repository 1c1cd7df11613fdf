from docview.cli import app

app()
