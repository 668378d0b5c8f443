import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import List
from gamerscove import schemas
from gamerscove.api.v1.deps import get_friendship_manager
from gamerscove.services.friendship_manager import FriendshipManager

router = APIRouter()
logger = logging.getLogger(__name__)

# Manager errors (FriendshipError) are turned into 400 responses by the handler in main.py.

@router.post(
    "/request",
    response_model=schemas.Friendship,
    status_code=status.HTTP_201_CREATED,
    summary="Send a friend request"
)
def send_friend_request(
    request_in: schemas.FriendRequestIn,
    manager: FriendshipManager = Depends(get_friendship_manager),
):
    logger.info(f"Received friend request from user {request_in.requester_id} to user {request_in.receiver_id}")
    return manager.send_friend_request(request_in.requester_id, request_in.receiver_id)

@router.put("/{friendship_id}/accept", response_model=schemas.Friendship, summary="Accept a friend request")
def accept_friend_request(
    friendship_id: str,
    user_id: int = Query(..., alias="userId"),
    manager: FriendshipManager = Depends(get_friendship_manager),
):
    return manager.accept_friend_request(friendship_id, user_id)

@router.put("/{friendship_id}/decline", response_model=schemas.Friendship, summary="Decline a friend request")
def decline_friend_request(
    friendship_id: str,
    user_id: int = Query(..., alias="userId"),
    manager: FriendshipManager = Depends(get_friendship_manager),
):
    return manager.decline_friend_request(friendship_id, user_id)

@router.delete(
    "/{friendship_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a friendship or cancel a request"
)
def remove_friendship(
    friendship_id: str,
    user_id: int = Query(..., alias="userId"),
    manager: FriendshipManager = Depends(get_friendship_manager),
):
    manager.remove_friendship(friendship_id, user_id)
    return

@router.get("/pending", response_model=List[schemas.Friendship], summary="List pending requests received by a user")
def get_pending_requests(
    user_id: int = Query(..., alias="userId"),
    manager: FriendshipManager = Depends(get_friendship_manager),
):
    return manager.get_pending_requests(user_id)

@router.get("/all", response_model=List[schemas.Friendship], summary="List every relationship of a user")
def get_all_friendships(
    user_id: int = Query(..., alias="userId"),
    manager: FriendshipManager = Depends(get_friendship_manager),
):
    return manager.get_all_friendships(user_id)

@router.get("/friends", response_model=List[schemas.Friendship], summary="List accepted friendships of a user")
def get_accepted_friends(
    user_id: int = Query(..., alias="userId"),
    manager: FriendshipManager = Depends(get_friendship_manager),
):
    return manager.get_accepted_friends(user_id)

@router.get("/friend-ids", response_model=List[int], summary="List the ids of a user's friends")
def get_friend_ids(
    user_id: int = Query(..., alias="userId"),
    manager: FriendshipManager = Depends(get_friendship_manager),
):
    return manager.get_friend_ids(user_id)

@router.get("/check", response_model=schemas.AreFriendsResponse, summary="Check whether two users are friends")
def check_friendship(
    user_id1: int = Query(..., alias="userId1"),
    user_id2: int = Query(..., alias="userId2"),
    manager: FriendshipManager = Depends(get_friendship_manager),
):
    return schemas.AreFriendsResponse(are_friends=manager.are_friends(user_id1, user_id2))

@router.get(
    "/check-pending",
    response_model=schemas.PendingRequestCheckResponse,
    summary="Check for a pending request from one user to another"
)
def check_pending_request(
    requester_id: int = Query(..., alias="requesterId"),
    receiver_id: int = Query(..., alias="receiverId"),
    manager: FriendshipManager = Depends(get_friendship_manager),
):
    return schemas.PendingRequestCheckResponse(
        has_pending_request=manager.has_pending_request(requester_id, receiver_id)
    )

@router.get("/{friendship_id}", response_model=schemas.Friendship, summary="Get a friendship by id")
def get_friendship(
    friendship_id: str,
    manager: FriendshipManager = Depends(get_friendship_manager),
):
    friendship = manager.get_friendship_by_id(friendship_id)
    if not friendship:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Friendship not found")
    return friendship
