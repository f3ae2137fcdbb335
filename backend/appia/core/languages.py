# appia/core/languages.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

DEFAULT_LANGUAGE = "react"


@dataclass(frozen=True)
class LanguageConfig:
    name: str
    extension: str
    framework: str
    dependencies: List[str]
    build_command: str
    dev_command: str
    base_prompt: str
    system_prompt: str


LANGUAGE_CONFIGS: Dict[str, LanguageConfig] = {
    "react": LanguageConfig(
        name="React",
        extension="jsx",
        framework="React",
        dependencies=["react", "react-dom", "vite", "@vitejs/plugin-react"],
        build_command="npm run build",
        dev_command="npm run dev",
        base_prompt="Create a modern React application with functional components and hooks. "
        "Use Tailwind CSS for styling and Lucide React for icons.",
        system_prompt="You are an expert React developer. Create beautiful, production-ready React "
        "components with modern patterns.",
    ),
    "vue": LanguageConfig(
        name="Vue.js",
        extension="vue",
        framework="Vue",
        dependencies=["vue", "vite", "@vitejs/plugin-vue"],
        build_command="npm run build",
        dev_command="npm run dev",
        base_prompt="Create a modern Vue.js application with Composition API. "
        "Use Tailwind CSS for styling and Heroicons for icons.",
        system_prompt="You are an expert Vue.js developer. Create beautiful, production-ready Vue "
        "components with the Composition API.",
    ),
    "angular": LanguageConfig(
        name="Angular",
        extension="ts",
        framework="Angular",
        dependencies=["@angular/core", "@angular/common", "@angular/platform-browser"],
        build_command="ng build",
        dev_command="ng serve",
        base_prompt="Create a modern Angular application with TypeScript. "
        "Use Angular Material for UI components and Tailwind CSS for styling.",
        system_prompt="You are an expert Angular developer. Create beautiful, production-ready "
        "Angular components.",
    ),
    "svelte": LanguageConfig(
        name="Svelte",
        extension="svelte",
        framework="Svelte",
        dependencies=["svelte", "vite", "@sveltejs/vite-plugin-svelte"],
        build_command="npm run build",
        dev_command="npm run dev",
        base_prompt="Create a modern Svelte application. Use Tailwind CSS for styling and Lucide Svelte for icons.",
        system_prompt="You are an expert Svelte developer. Create beautiful, production-ready Svelte components.",
    ),
    "nextjs": LanguageConfig(
        name="Next.js",
        extension="jsx",
        framework="Next.js",
        dependencies=["next", "react", "react-dom"],
        build_command="npm run build",
        dev_command="npm run dev",
        base_prompt="Create a modern Next.js application with App Router. "
        "Use Tailwind CSS for styling and Lucide React for icons.",
        system_prompt="You are an expert Next.js developer. Create beautiful, production-ready "
        "Next.js applications.",
    ),
    "nuxt": LanguageConfig(
        name="Nuxt.js",
        extension="vue",
        framework="Nuxt",
        dependencies=["nuxt", "vue"],
        build_command="npm run build",
        dev_command="npm run dev",
        base_prompt="Create a modern Nuxt.js application. Use Tailwind CSS for styling and Heroicons for icons.",
        system_prompt="You are an expert Nuxt.js developer. Create beautiful, production-ready Nuxt.js applications.",
    ),
    "vanilla": LanguageConfig(
        name="Vanilla JS",
        extension="js",
        framework="Vanilla",
        dependencies=["vite"],
        build_command="npm run build",
        dev_command="npm run dev",
        base_prompt="Create a modern vanilla JavaScript application. Use Tailwind CSS for styling and Lucide for icons.",
        system_prompt="You are an expert vanilla JavaScript developer. Create beautiful, production-ready "
        "applications with modern ES6+ code.",
    ),
    "typescript": LanguageConfig(
        name="TypeScript",
        extension="ts",
        framework="TypeScript",
        dependencies=["typescript", "vite", "@types/node"],
        build_command="npm run build",
        dev_command="npm run dev",
        base_prompt="Create a modern TypeScript application. Use Tailwind CSS for styling and Lucide for icons.",
        system_prompt="You are an expert TypeScript developer. Create beautiful, production-ready "
        "applications with strict typing.",
    ),
    "python": LanguageConfig(
        name="Python",
        extension="py",
        framework="Flask",
        dependencies=["flask", "flask-cors"],
        build_command="python app.py",
        dev_command="python app.py",
        base_prompt="Create a modern Python web application with Flask. "
        "Use Bootstrap for styling and create a responsive design.",
        system_prompt="You are an expert Python developer. Create beautiful, production-ready Python web "
        "applications with Flask.",
    ),
    "php": LanguageConfig(
        name="PHP",
        extension="php",
        framework="Laravel",
        dependencies=["laravel/framework"],
        build_command="php artisan build",
        dev_command="php artisan serve",
        base_prompt="Create a modern PHP web application. Use Tailwind CSS for styling and create a responsive design.",
        system_prompt="You are an expert PHP developer. Create beautiful, production-ready PHP web applications.",
    ),
    "go": LanguageConfig(
        name="Go",
        extension="go",
        framework="Gin",
        dependencies=["github.com/gin-gonic/gin"],
        build_command="go build",
        dev_command="go run main.go",
        base_prompt="Create a modern Go web application with the Gin framework. "
        "Use Tailwind CSS for styling and create a responsive design.",
        system_prompt="You are an expert Go developer. Create beautiful, production-ready Go web applications.",
    ),
    "rust": LanguageConfig(
        name="Rust",
        extension="rs",
        framework="Actix",
        dependencies=["actix-web", "serde"],
        build_command="cargo build",
        dev_command="cargo run",
        base_prompt="Create a modern Rust web application with Actix-web. "
        "Use Tailwind CSS for styling and create a responsive design.",
        system_prompt="You are an expert Rust developer. Create beautiful, production-ready Rust web applications.",
    ),
}


def get_language_config(language: str | None) -> LanguageConfig:
    """Unknown or empty languages fall back to React."""
    key = (language or "").strip().lower()
    return LANGUAGE_CONFIGS.get(key) or LANGUAGE_CONFIGS[DEFAULT_LANGUAGE]
