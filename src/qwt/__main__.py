from qwt.main import app

app()
