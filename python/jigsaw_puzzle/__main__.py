from jigsaw_puzzle.main import app

app()
