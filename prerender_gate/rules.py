"""
Prerender Gate - Rule Catalog
==============================

What:  Static lists consulted by the request classifier.
How:   Plain string lists. Hosts may append to them at startup or hand their
       own lists to RequestClassifier.

CRAWLER_USER_AGENTS:  substrings matched case-insensitively against User-Agent.
EXTENSIONS_TO_IGNORE: path suffixes of static assets that are never snapshotted.
"""

CRAWLER_USER_AGENTS = [
    "googlebot",
    "Google-InspectionTool",
    "Yahoo! Slurp",
    "bingbot",
    "yandex",
    "baiduspider",
    "facebookexternalhit",
    "twitterbot",
    "rogerbot",
    "linkedinbot",
    "embedly",
    "quora link preview",
    "showyoubot",
    "outbrain",
    "pinterest/0.",
    "developers.google.com/+/web/snippet",
    "slackbot",
    "vkShare",
    "W3C_Validator",
    "redditbot",
    "Applebot",
    "WhatsApp",
    "flipboard",
    "tumblr",
    "bitlybot",
    "SkypeUriPreview",
    "nuzzel",
    "Discordbot",
    "Google Page Speed",
    "Qwantify",
    "pinterestbot",
    "Bitrix link preview",
    "XING-contenttabreceiver",
    "Chrome-Lighthouse",
    "TelegramBot",
    "SeznamBot",
    "screaming frog SEO spider",
    "AhrefsBot",
    "AhrefsSiteAudit",
    "Iframely",
]

EXTENSIONS_TO_IGNORE = [
    ".js",
    ".css",
    ".xml",
    ".less",
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".pdf",
    ".doc",
    ".txt",
    ".ico",
    ".rss",
    ".zip",
    ".mp3",
    ".rar",
    ".exe",
    ".wmv",
    ".avi",
    ".ppt",
    ".mpg",
    ".mpeg",
    ".tif",
    ".wav",
    ".mov",
    ".psd",
    ".ai",
    ".xls",
    ".mp4",
    ".m4a",
    ".swf",
    ".dat",
    ".dmg",
    ".iso",
    ".flv",
    ".m4v",
    ".torrent",
    ".woff",
    ".woff2",
    ".ttf",
    ".svg",
    ".webmanifest",
    ".webp",
]
