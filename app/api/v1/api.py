"""
API router aggregator: wires all endpoint modules together.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (access, auth, centers, classes, diets,
                                  exercises, health, machines, meals,
                                  memberships, notifications, tickets, users,
                                  workouts)

api_router = APIRouter()

# Liveness
api_router.include_router(health.router)

# Auth (register, login, refresh, me)
api_router.include_router(auth.router)

# QR entry / exit
api_router.include_router(access.router)

# Users, centers and the rest of the gym catalogue
api_router.include_router(users.router)
api_router.include_router(centers.router)
api_router.include_router(classes.router)
api_router.include_router(machines.router)
api_router.include_router(tickets.router)
api_router.include_router(memberships.router)

# Training and nutrition
api_router.include_router(exercises.router)
api_router.include_router(workouts.router)
api_router.include_router(meals.router)
api_router.include_router(diets.router)

# In-app notifications
api_router.include_router(notifications.router)
