"""Logging helpers: context loggers, a rotating log file writer and a line formatter."""