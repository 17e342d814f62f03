"""zerobug_core - building blocks for the ZeroBug build notifier"""
