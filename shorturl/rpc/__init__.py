"""Request context and status errors, ping, stats and user-link handlers, and request logging."""