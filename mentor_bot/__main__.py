from mentor_bot.launcher import main

main()
