from bdaybot.bot.bot import run

run()
