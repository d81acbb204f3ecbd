from releaseradar.ui.cli import run

run()
