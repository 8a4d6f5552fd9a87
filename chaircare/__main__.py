"""
Start de pricing API lokaal: python -m chaircare
"""
import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "chaircare.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "0") == "1",
    )


if __name__ == "__main__":
    main()
