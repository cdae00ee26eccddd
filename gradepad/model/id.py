import typing as t

CourseID = t.NewType("CourseID", int)
ActivityID = t.NewType("ActivityID", int)
PersonID = t.NewType("PersonID", int)
# a subject is a person being graded
SubjectID = t.NewType("SubjectID", int)
ResourceID = t.NewType("ResourceID", int)
LinkID = t.NewType("LinkID", int)
