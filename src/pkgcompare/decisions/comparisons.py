"""Curated comparison groups and package replacements."""

from pkgcompare.models.schemas import ComparisonCategory, PackageAlternatives

# Hand-picked groups, keyed by seed category ID so they merge with
# keyword-discovered groups of the same category.
COMPARISON_CATEGORIES: tuple[ComparisonCategory, ...] = (
    ComparisonCategory(
        category="date-library",
        name="Date Libraries",
        description="Libraries for date/time manipulation",
        packages=["moment", "date-fns", "dayjs", "luxon"],
    ),
    ComparisonCategory(
        category="http-client",
        name="HTTP Clients",
        description="Libraries for making HTTP requests",
        packages=["axios", "got", "ky", "node-fetch", "undici"],
    ),
    ComparisonCategory(
        category="state-management",
        name="State Management",
        description="React state management solutions",
        packages=["redux", "zustand", "jotai", "recoil", "mobx"],
    ),
    ComparisonCategory(
        category="validation",
        name="Validation Libraries",
        description="Schema validation and parsing",
        packages=["zod", "yup", "joi", "ajv", "valibot"],
    ),
    ComparisonCategory(
        category="orm",
        name="ORMs & Query Builders",
        description="Database ORMs and query builders",
        packages=["prisma", "drizzle-orm", "typeorm", "sequelize", "knex"],
    ),
    ComparisonCategory(
        category="testing",
        name="Testing Frameworks",
        description="JavaScript testing frameworks",
        packages=["vitest", "jest", "mocha", "ava"],
    ),
    ComparisonCategory(
        category="css-in-js",
        name="CSS-in-JS",
        description="CSS-in-JS and styling solutions",
        packages=["tailwindcss", "styled-components", "emotion", "@vanilla-extract/css"],
    ),
    ComparisonCategory(
        category="bundler",
        name="Bundlers",
        description="JavaScript bundlers and build tools",
        packages=["vite", "esbuild", "webpack", "rollup", "parcel"],
    ),
)

# Deprecated or dated packages and what to use instead
PACKAGE_ALTERNATIVES: dict[str, PackageAlternatives] = {
    "moment": PackageAlternatives(
        alternatives=("date-fns", "dayjs", "luxon"),
        recommended="date-fns",
        reason="moment is in maintenance mode and has a large bundle size",
    ),
    "request": PackageAlternatives(
        alternatives=("got", "axios", "ky", "node-fetch"),
        recommended="got",
        reason="request is deprecated",
    ),
    "node-sass": PackageAlternatives(
        alternatives=("sass", "dart-sass"),
        recommended="sass",
        reason="node-sass is deprecated, use dart-sass (sass package)",
    ),
    "tslint": PackageAlternatives(
        alternatives=("eslint", "@typescript-eslint/eslint-plugin"),
        recommended="eslint",
        reason="tslint is deprecated in favor of ESLint with TypeScript support",
    ),
    "enzyme": PackageAlternatives(
        alternatives=("@testing-library/react", "vitest"),
        recommended="@testing-library/react",
        reason="enzyme is not maintained for React 18+",
    ),
    "create-react-app": PackageAlternatives(
        alternatives=("vite", "next", "remix"),
        recommended="vite",
        reason="CRA is no longer recommended by React team",
    ),
    "lodash": PackageAlternatives(
        alternatives=("es-toolkit", "radash", "remeda"),
        recommended="es-toolkit",
        reason="Modern alternatives with better tree-shaking and TypeScript support",
    ),
    "underscore": PackageAlternatives(
        alternatives=("lodash", "es-toolkit", "radash"),
        recommended="es-toolkit",
        reason="underscore is largely superseded by modern alternatives",
    ),
}


def get_comparison_categories() -> list[ComparisonCategory]:
    """Get the curated comparison groups."""
    return list(COMPARISON_CATEGORIES)


def get_alternatives(name: str) -> PackageAlternatives | None:
    """Get curated replacements for a package, if any."""
    return PACKAGE_ALTERNATIVES.get(name)
