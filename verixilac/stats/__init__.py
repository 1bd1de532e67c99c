"""Game statistics records and their persistent tracker."""