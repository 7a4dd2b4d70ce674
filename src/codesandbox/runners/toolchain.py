from __future__ import annotations
import shutil
from typing import Dict, List

MISSING_MESSAGES: Dict[str, str] = {
    "javascript": "Node.js is not installed. Please install Node.js to run JavaScript code.",
    "python": "Python is not installed. Please install Python to run Python code.",
    "typescript": "TypeScript or ts-node is not installed. Please install Node.js and TypeScript to run TypeScript code.",
    "java": "Java JDK is not installed. Please install Java JDK to compile and run Java code.",
    "cpp": "G++ compiler is not installed. Please install a C++ compiler to run C++ code.",
}

INSTALL_GUIDES: Dict[str, str] = {
    "java": """To enable Java code execution:
1. Install JDK 11 or higher from https://adoptium.net/
2. Add Java to your system PATH
3. Verify installation: java -version""",
    "python": """To enable Python code execution:
1. Install Python 3.8+ from https://python.org/downloads/
2. Add Python to your system PATH
3. Verify installation: python --version""",
    "cpp": """To enable C++ code execution:
1. Install GCC compiler:
   - Windows: MinGW-w64 or Visual Studio
   - macOS: Xcode Command Line Tools
   - Linux: sudo apt install g++
2. Verify installation: g++ --version""",
    "javascript": """To enable Node.js JavaScript execution:
1. Install Node.js from https://nodejs.org/
2. Verify installation: node --version""",
    "typescript": """To enable TypeScript execution:
1. Install Node.js from https://nodejs.org/
2. Install TypeScript and ts-node: npm install -g typescript ts-node
3. Verify installation: npx ts-node --version""",
}


def missing_message(language: str) -> str:
    return MISSING_MESSAGES.get(language, f"Language '{language}' runtime is not installed.")


def installation_guide(language: str) -> str:
    return INSTALL_GUIDES.get(
        language,
        f"To enable {language} code execution, please install the appropriate "
        f"runtime/compiler for {language} on your system.",
    )


def probe(tools: List[str]) -> Dict[str, bool]:
    """Which of `tools` resolve on PATH (absolute paths are checked as-is)."""
    return {t: shutil.which(t) is not None for t in tools}
