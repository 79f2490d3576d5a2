#!/usr/bin/env python3
"""
EHRLICH — Запуск API сервера

Запуск:
    python scripts/run_api.py
    python scripts/run_api.py --port 8080
    python scripts/run_api.py --knowledge data/knowledge_base.yaml
"""

import os
import sys
import argparse
from pathlib import Path

# Додаємо корінь проекту до path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def main():
    parser = argparse.ArgumentParser(description='EHRLICH API Server')
    parser.add_argument('--host', default='0.0.0.0', help='Host (default: 0.0.0.0)')
    parser.add_argument('--port', type=int, default=8000, help='Port (default: 8000)')
    parser.add_argument('--reload', action='store_true', help='Enable auto-reload')
    parser.add_argument('--knowledge', default=None, help='Knowledge base file (.yaml/.json)')
    
    args = parser.parse_args()
    
    if args.knowledge:
        os.environ["KNOWLEDGE_PATH"] = str(Path(args.knowledge).resolve())
    os.environ["API_HOST"] = args.host
    os.environ["API_PORT"] = str(args.port)
    
    print("=" * 60)
    print("🏥 EHRLICH — API Server")
    print("=" * 60)
    print(f"   Host: {args.host}")
    print(f"   Port: {args.port}")
    print(f"   Reload: {args.reload}")
    print(f"   Knowledge: {args.knowledge or 'auto'}")
    print("=" * 60)
    
    import uvicorn
    
    uvicorn.run(
        "ehrlich.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
