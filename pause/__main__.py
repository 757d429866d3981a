from pause.cli import app

app(prog_name="pause")
