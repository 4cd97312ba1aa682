from pydantic import BaseModel


# Delete responses for every collection; deleting a missing id also succeeds
class DeleteResult(BaseModel):
    message: str = "Deleted successfully"
