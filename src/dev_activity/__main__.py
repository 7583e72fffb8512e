from dev_activity.cli.app import app

app()
