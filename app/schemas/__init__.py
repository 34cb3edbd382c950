from .ResumeSchemas import (
	ResumeDraft,
	SaveResumeRequest,
	ResumeRecord,
	PublicPortfolio,
	DashboardStats,
	ViewStats,
	GenerateResumeRequest,
	GeneratedResume,
)
from .AuthSchemas import (
	RegisterRequest,
	LoginRequest,
	ProfilePictureRequest,
	AccountProfile,
)

__all__ = [
	"ResumeDraft",
	"SaveResumeRequest",
	"ResumeRecord",
	"PublicPortfolio",
	"DashboardStats",
	"ViewStats",
	"GenerateResumeRequest",
	"GeneratedResume",
	"RegisterRequest",
	"LoginRequest",
	"ProfilePictureRequest",
	"AccountProfile",
]
