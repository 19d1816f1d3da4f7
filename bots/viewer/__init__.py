"""
Terminal viewer for Twitch chat

Joins a channel anonymously and prints every chat message with
coloured names, badge icons and optional timestamps:

- Channel from the command line, the config file, or a prompt
- Settings in ~/.config/gtc/config.yaml
- Optional message log (chat.log.jsonl)

Usage:
    gtc [channel]
    python -m bots.viewer.bot [channel]
"""
