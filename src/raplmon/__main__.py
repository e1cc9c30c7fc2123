from raplmon.ui.cli import app

app()
