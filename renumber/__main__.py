from renumber.app import run

run()
