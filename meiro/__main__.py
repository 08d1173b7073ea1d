from meiro.app import run

run()
