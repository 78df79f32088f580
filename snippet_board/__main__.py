from snippet_board.cli import main

main()
