from .cli import app

app(prog_name="faces-player")
