from mem2incident.cli import run

if __name__ == "__main__":
    run()
