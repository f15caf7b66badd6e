"""Seed category catalog and keyword-based category inference."""

from collections.abc import Iterable, Sequence

from pkgcompare.models.schemas import CategoryDefinition, CategorySource


def _category(id: str, name: str, keywords: list[str], min_matches: int = 1) -> CategoryDefinition:
    return CategoryDefinition(id=id, name=name, keywords=tuple(keywords), min_matches=min_matches)


# Curated categories. Categories found by keyword analysis live in an external
# store and are merged in by CategoryProvider.
SEED_CATEGORIES: tuple[CategoryDefinition, ...] = (
    # HTTP & Networking
    _category(
        "http-client",
        "HTTP Clients",
        ["http", "request", "fetch", "ajax", "rest-client", "api-client", "axios", "got"],
        min_matches=2,
    ),
    _category("websocket", "WebSocket Libraries", ["websocket", "ws", "socket", "realtime", "socket.io"]),
    _category("graphql-client", "GraphQL Clients", ["graphql", "gql", "apollo", "urql", "relay"]),
    # Data & Validation
    _category(
        "date-library",
        "Date Libraries",
        ["date", "time", "moment", "datetime", "calendar", "timezone", "dayjs", "luxon"],
        min_matches=2,
    ),
    _category(
        "validation",
        "Validation Libraries",
        ["validation", "schema", "validator", "validate", "zod", "yup", "joi"],
    ),
    _category("uuid", "ID Generators", ["uuid", "id", "nanoid", "cuid", "ulid", "unique-id"]),
    _category("json", "JSON Utilities", ["json", "json5", "jsonc", "json-parser", "superjson"]),
    # Database & ORM
    _category(
        "orm",
        "ORMs & Query Builders",
        ["orm", "database", "sql", "query-builder", "prisma", "sequelize", "typeorm", "drizzle"],
        min_matches=2,
    ),
    _category("redis-client", "Redis Clients", ["redis", "ioredis", "cache"]),
    _category("mongodb", "MongoDB Clients", ["mongodb", "mongoose", "mongo"]),
    # State Management
    _category(
        "state-management",
        "State Management",
        ["state", "store", "redux", "flux", "state-management", "zustand", "jotai", "recoil", "mobx"],
        min_matches=2,
    ),
    # Testing
    _category(
        "testing",
        "Testing Frameworks",
        ["test", "testing", "jest", "mocha", "vitest", "spec", "assertion", "unit-test"],
        min_matches=2,
    ),
    _category(
        "e2e-testing",
        "E2E Testing",
        ["e2e", "playwright", "cypress", "puppeteer", "selenium", "browser-testing"],
    ),
    _category("mocking", "Mocking Libraries", ["mock", "stub", "spy", "faker", "msw", "nock"]),
    # Build Tools
    _category(
        "bundler",
        "Bundlers",
        ["bundler", "build-tool", "webpack", "rollup", "esbuild", "vite", "parcel"],
    ),
    _category("transpiler", "Transpilers", ["transpiler", "babel", "swc", "typescript", "compiler"]),
    _category("linter", "Linters", ["linter", "eslint", "tslint", "lint", "prettier", "formatter"]),
    # Styling
    _category(
        "css-in-js",
        "CSS-in-JS",
        ["css-in-js", "styled-components", "emotion", "styling", "css", "jss"],
        min_matches=2,
    ),
    _category("css-framework", "CSS Frameworks", ["tailwind", "bootstrap", "bulma", "css-framework", "ui-kit"]),
    # Logging & Monitoring
    _category(
        "logging",
        "Logging Libraries",
        ["logger", "logging", "log", "debug", "pino", "winston", "bunyan"],
    ),
    _category("error-tracking", "Error Tracking", ["error", "sentry", "bugsnag", "rollbar", "error-tracking"]),
    # CLI & Terminal
    _category(
        "cli",
        "CLI Frameworks",
        ["cli", "command-line", "terminal", "argv", "commander", "yargs", "oclif"],
        min_matches=2,
    ),
    _category("terminal-ui", "Terminal UI", ["terminal", "chalk", "ora", "inquirer", "prompts", "readline"]),
    # File & System
    _category(
        "file-system",
        "File System Utilities",
        ["file", "fs", "filesystem", "glob", "fs-extra", "chokidar"],
        min_matches=2,
    ),
    _category("path", "Path Utilities", ["path", "url", "resolve", "pathname"]),
    # Parsing
    _category("markdown", "Markdown Parsers", ["markdown", "md", "remark", "marked", "mdx", "commonmark"]),
    _category("yaml", "YAML Parsers", ["yaml", "yml", "js-yaml"]),
    _category("csv", "CSV Parsers", ["csv", "tsv", "spreadsheet", "papaparse"]),
    _category("xml", "XML Parsers", ["xml", "sax", "dom-parser", "xmldom", "fast-xml-parser"]),
    _category("html-parser", "HTML Parsers", ["html", "cheerio", "jsdom", "htmlparser", "scraper"]),
    # Image & Media
    _category("image", "Image Processing", ["image", "sharp", "jimp", "resize", "thumbnail", "canvas"]),
    _category("pdf", "PDF Libraries", ["pdf", "pdfkit", "pdf-lib", "jspdf", "document"]),
    # Security & Crypto
    _category("crypto", "Cryptography", ["crypto", "encryption", "hash", "bcrypt", "argon", "cipher"]),
    _category("auth", "Authentication", ["auth", "authentication", "jwt", "oauth", "passport", "session"]),
    # Email & Messaging
    _category("email", "Email Libraries", ["email", "mail", "smtp", "nodemailer", "sendgrid"]),
    _category("queue", "Job Queues", ["queue", "job", "worker", "bull", "bee-queue", "agenda"]),
    # Compression & Encoding
    _category("compression", "Compression", ["compression", "gzip", "zip", "tar", "archiver", "zlib"]),
    _category("encoding", "Encoding/Decoding", ["base64", "encoding", "decode", "encode", "buffer"]),
    # Utilities
    _category(
        "lodash-like",
        "Utility Libraries",
        ["lodash", "underscore", "ramda", "utility", "helper", "toolkit"],
    ),
    _category(
        "string",
        "String Utilities",
        ["string", "slugify", "truncate", "case", "camelcase", "change-case"],
    ),
    _category(
        "number",
        "Number/Math Libraries",
        ["number", "decimal", "big", "math", "bignumber", "decimal.js"],
    ),
    _category("color", "Color Libraries", ["color", "colour", "hex", "rgb", "hsl", "tinycolor"]),
    # Async & Concurrency
    _category(
        "promise",
        "Promise/Async Utilities",
        ["promise", "async", "await", "bluebird", "p-limit", "p-queue"],
    ),
    _category("stream", "Stream Utilities", ["stream", "pipe", "readable", "writable", "through2"]),
    _category("event", "Event Emitters", ["event", "emitter", "pubsub", "eventemitter", "mitt"]),
    # React Ecosystem
    _category(
        "react-form",
        "React Form Libraries",
        ["form", "formik", "react-hook-form", "final-form", "react-form"],
    ),
    _category(
        "react-table",
        "React Table/Grid",
        ["table", "datagrid", "grid", "tanstack-table", "react-table", "ag-grid"],
    ),
    _category(
        "react-query",
        "Data Fetching (React)",
        ["react-query", "swr", "tanstack", "data-fetching", "query"],
    ),
    _category("react-router", "React Routing", ["router", "routing", "react-router", "navigation", "wouter"]),
    _category(
        "react-animation",
        "React Animation",
        ["animation", "animate", "motion", "framer", "spring", "react-spring"],
    ),
    # UI Components
    _category(
        "ui-components",
        "UI Component Libraries",
        ["ui", "components", "material-ui", "chakra", "ant-design", "radix"],
        min_matches=2,
    ),
    _category("modal", "Modal/Dialog", ["modal", "dialog", "popup", "overlay", "lightbox"]),
    _category(
        "notification",
        "Notifications/Toasts",
        ["notification", "toast", "alert", "snackbar", "toastify"],
    ),
    _category("carousel", "Carousels/Sliders", ["carousel", "slider", "swiper", "slick", "slideshow"]),
    _category(
        "rich-text",
        "Rich Text Editors",
        ["rich-text", "wysiwyg", "editor", "contenteditable", "quill", "tiptap", "slate"],
    ),
    _category(
        "code-highlight",
        "Code Highlighting",
        ["syntax", "highlight", "prism", "shiki", "highlightjs", "code-block"],
    ),
    _category(
        "chart",
        "Charts & Visualization",
        ["chart", "graph", "visualization", "d3", "recharts", "chartjs"],
    ),
    _category("icons", "Icon Libraries", ["icons", "icon", "lucide", "heroicons", "feather", "fontawesome"]),
    # i18n
    _category(
        "i18n",
        "Internationalization",
        ["i18n", "internationalization", "translation", "locale", "intl", "react-intl"],
    ),
    # Environment & Config
    _category("config", "Configuration", ["config", "env", "dotenv", "configuration", "settings", "rc"]),
    _category("env-validation", "Environment Validation", ["env", "environment", "t3-env", "envalid"]),
)

_SEED_BY_ID: dict[str, CategoryDefinition] = {category.id: category for category in SEED_CATEGORIES}

# Added to seed category scores so they win ties against discovered ones.
SEED_TIE_BONUS = 0.001


def get_category(id: str) -> CategoryDefinition | None:
    """Get a seed category by ID."""
    return _SEED_BY_ID.get(id)


def get_category_name(id: str) -> str:
    """Get the human-readable name for a category, or the ID if unknown."""
    category = get_category(id)
    return category.name if category else id


def get_all_category_ids() -> list[str]:
    """Get all seed category IDs in catalog order."""
    return [category.id for category in SEED_CATEGORIES]


def count_keyword_matches(category: CategoryDefinition, keywords: Sequence[str]) -> int:
    """Count category keywords that fuzzily match any of the given keywords.

    A category keyword matches an input keyword when they are equal or
    either one contains the other. ``keywords`` must already be lower-cased.
    """
    matches = 0
    for cat_keyword in category.keywords:
        if any(k == cat_keyword or cat_keyword in k or k in cat_keyword for k in keywords):
            matches += 1
    return matches


def best_category_match(
    keywords: Iterable[str],
    categories: Iterable[CategoryDefinition],
) -> tuple[CategoryDefinition, float] | None:
    """Find the best matching category for a keyword list.

    Args:
        keywords: Free-text package keywords.
        categories: Candidate categories. Categories without a ``source``
            attribute are treated as seed categories.

    Returns:
        Tuple of (category, score), or None if no category has enough matches.
    """
    lower_keywords = [k.strip().lower() for k in keywords if k and k.strip()]
    if not lower_keywords:
        return None

    best: tuple[CategoryDefinition, float] | None = None

    for category in categories:
        if not category.keywords:
            continue

        matches = count_keyword_matches(category, lower_keywords)
        if matches < category.min_matches:
            continue

        # Fraction of the category's own keywords matched favors small, precise categories
        score = matches / len(category.keywords)
        if getattr(category, "source", CategorySource.SEED) == CategorySource.SEED:
            score += SEED_TIE_BONUS

        if best is None or score > best[1]:
            best = (category, score)

    return best


def infer_category(
    keywords: Iterable[str] | None,
    categories: Iterable[CategoryDefinition] | None = None,
) -> str | None:
    """Infer a category ID from package keywords.

    Args:
        keywords: Package keywords from package.json.
        categories: Categories to choose from. Defaults to the seed catalog.

    Returns:
        Best matching category ID, or None if nothing qualifies.
    """
    if not keywords:
        return None

    match = best_category_match(keywords, SEED_CATEGORIES if categories is None else categories)
    return match[0].id if match else None
