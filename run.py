#!/usr/bin/env python3
"""
Simple script to run the booking relay server
"""

import uvicorn
from booking_relay.config import Settings

if __name__ == "__main__":
    config = Settings()

    print("Starting Booking Relay...")
    print(f"Server will be available at: http://{config.HOST}:{config.PORT}")
    print(f"API Documentation: http://{config.HOST}:{config.PORT}/docs")
    print(f"Debug mode: {config.DEBUG}")
    print("-" * 50)

    uvicorn.run(
        "booking_relay.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.DEBUG,
        log_level="info" if not config.DEBUG else "debug"
    )
