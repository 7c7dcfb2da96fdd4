from puzzlebot.server import main

main()
