server = ''
port = 5555

# Upper bound (exclusive) on a single response window, in whole seconds.
MAX_WINDOW_SECONDS = 3
# A round never lasts longer than this, however well the clients play.
MAX_ROUND_SECONDS = 60

WINDOW_WIDTH = 640
WINDOW_HEIGHT = 360
FPS = 60

# Fraction of each window the bot client waits before answering.
BOT_FRACTION = 0.5
