from termplayer.cli import main

main()
