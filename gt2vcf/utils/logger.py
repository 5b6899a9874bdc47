import sys, time, datetime

from clint.textui import puts_err, colored

available_colors = {'red', 'green', 'yellow', 'blue', 'black', 'magenta', 'cyan', 'white'}

def colorize(msg, color):
    function = getattr(colored, color)
    return function(msg)

def timestamp():
    return time.strftime("[ %Y-%m-%d %T ]", datetime.datetime.now().timetuple())

def logit(msg, color=None):
    fullmsg = "{} {}".format(timestamp(), msg)
    formatted_msg = colorize(fullmsg, color) if color in available_colors else fullmsg
    puts_err(formatted_msg)
    sys.stdout.flush()
    sys.stderr.flush()

def debug(msg, enabled):
    if enabled:
        logit(f"[debug] {msg}", color="blue")

def warn(msg):
    logit(f"[warn] {msg}", color="yellow")
