from mediamachine.cli import main

main()
