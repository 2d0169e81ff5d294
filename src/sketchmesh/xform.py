## generalized matrix transformation operations for 3D homogeneous
## coordinates in sketchmesh

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## Copyright (c) 2026 sketchmesh contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from math import *
import mpmath as mpm
import sketchmesh.geom as geom

## a matrix is represented as a list of four four vectors. In a
## matrix, vectors represent rows unless the transpose property is
## true.  Because vectors are represented as lists (not as instances
## of a class with meta-info) we assume that operations like Mx imply
## a column vector and that xM imply a row vector.

## Matrix is a relatively lightweight class that provides foundation
## matrix-matrix and matrix-vector operations.  Inverses of rigid
## transforms are composed analytically where possible (see Frame);
## general inversion, needed for projection matrices, is numeric.

## Frame is the mutable position + orientation of a scene node, such
## as a billboard or the sky dome.


class Matrix:
    """4x4 transformation matrix class for transforming homogemenous 3D coordinates"""

    def __init__(self,a=False,trans=False):
        self.m = [[1,0,0,0],
                  [0,1,0,0],
                  [0,0,1,0],
                  [0,0,0,1]]
        self.trans=False

        if isinstance(a,Matrix):
            for i in range(4):
                self.setrow(i,a.getrow(i))

        elif isinstance(a,(tuple,list)):
            if len(a) == 4:
                r1 =a[0]
                r2 =a[1]
                r3 =a[2]
                r4 =a[3]
                if len(r1) == len(r2) == len(r3) == len(r4) == 4:
                    for i in range(4):
                        for j in range(4):
                            x =a[i][j]
                            if geom.isgoodnum(x):
                                self.m[i][j]=x
                            else:
                                raise ValueError('bad element in matrix initialization: {}'.format(x))
            elif len(a)==16:
                for i in range(4):
                    for j in range(4):
                        ind=i*4+j
                        x = a[ind]
                        if geom.isgoodnum(x):
                            self.m[i][j]=x
                        else:
                            raise ValueError('bad element in matrix initialization: {}'.format(x))
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        elif a is not False:
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        self.trans=trans

    def __repr__(self):
        return "Matrix({},{},{},{},{})".format(self.m[0],self.m[1],
                                               self.m[2],self.m[3],self.trans)

    #return value indexed by i,j
    def get(self,i,j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to get: {},{}'.format(i,j))
        if self.trans:
            return self.m[j][i]
        else:
            return self.m[i][j]

    #set value indexed by i,j
    def set(self,i,j,x):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to set: {},{}'.format(i,j))
        if geom.isgoodnum(x):
            if self.trans:
                self.m[j][i]=x
            else:
                self.m[i][j]=x
        else:
            raise ValueError('bad value passed to set: {}'.format(x))

    def getrow(self,i):
        if i < 0 or i > 3:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        if self.trans:
            return [self.m[0][i],
                    self.m[1][i],
                    self.m[2][i],
                    self.m[3][i]]
        else:
            return self.m[i]

    def getcol(self,j):
        if j < 0 or j > 3:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        if not self.trans:
            return [self.m[0][j],
                    self.m[1][j],
                    self.m[2][j],
                    self.m[3][j]]
        else:
            return self.m[j]

    def setrow(self,i,x):
        if not geom.isvect(x):
            raise ValueError('bad non-vector passed to setrow: {}'.format(x))
        if i < 0 or i > 3:
            raise ValueError('bad row index passed to setrow: {}'.format(i))
        if self.trans:
            self.m[0][i] = x[0]
            self.m[1][i] = x[1]
            self.m[2][i] = x[2]
            self.m[3][i] = x[3]
        else:
            self.m[i] = list(x)

    def rows(self):
        return [list(self.getrow(i)) for i in range(4)]

    # matrix multiply.  If x is a matrix, compute MX.  If X is a
    # vector, compute Mx. If x is a scalar, compute xM.  Respects
    # transpose flag.

    def mul(self,x):
        if isinstance(x,Matrix):
            result = Matrix()
            for i in range(4):
                for j in range(4):
                    result.set(i,j,
                               geom.dot4(self.getrow(i),x.getcol(j)))
            return result
        elif geom.isvect(x):
            result = geom.vect()
            for i in range(4):
                result[i]=geom.dot4(self.getrow(i),x)
            return result
        elif geom.isgoodnum(x):
            result = Matrix()
            for i in range(4):
                result.setrow(i,geom.scale4(self.getrow(i),x))
            return result

        raise ValueError('bad thing passed to mul(): {}'.format(x))

    def transpose(self):
        return Matrix([list(self.getcol(j)) for j in range(4)])

    # numeric inverse, computed with mpmath's LU solver.  Raises
    # ValueError if the matrix is singular.
    def inverse(self):
        a = mpm.matrix(self.rows())
        try:
            ainv = mpm.inverse(a)
        except ZeroDivisionError as exc:
            raise ValueError('singular matrix cannot be inverted: {}'.format(self)) from exc
        return Matrix([[float(ainv[i,j]) for j in range(4)] for i in range(4)])

    # transform a point and project the result back to the w=1 plane
    def transform_point(self,p):
        return geom.homo(self.mul(geom.point(p)))

    # transform a direction vector; translation is ignored
    def transform_direction(self,v):
        r = self.mul(geom.direction(v[0],v[1],v[2]))
        r[3] = 0
        return r


def Translation(delta,inverse=False):
    if inverse:
        delta = geom.scale3(delta,-1.0)
    dx = delta[0]
    dy = delta[1]
    dz = delta[2]
    T = [[1,0,0,dx],
         [0,1,0,dy],
         [0,0,1,dz],
         [0,0,0,1]]
    return Matrix(T)

## build a rotation matrix from three orthonormal basis vectors, which
## become the columns of the matrix
def Basis(x,y,z):
    return Matrix([[x[0],y[0],z[0],0],
                   [x[1],y[1],z[1],0],
                   [x[2],y[2],z[2],0],
                   [0,0,0,1]])

def _orthobasis(z,up):
    ## if z and up are parallel, nudge z off the up axis
    x = geom.cross(up,z)
    if geom.mag(x) < geom.epsilon:
        if geom.close(abs(up[2]),1.0):
            z = [z[0]+0.0001,z[1],z[2],1.0]
        else:
            z = [z[0],z[1],z[2]+0.0001,1.0]
        z = geom.normalize(z)
        x = geom.cross(up,z)
    x = geom.normalize(x)
    y = geom.cross(z,x)
    return x,y,z

def LookRotation(forward,up=None):
    """rotation that points the local -Z axis along ``forward``, the
    convention used for cameras"""
    if up is None:
        up = geom.up()
    z = geom.normalize(geom.scale3(forward,-1.0))
    return Basis(*_orthobasis(z,up))

def FacingRotation(position,target,up=None):
    """rotation that points the local +Z axis from ``position`` toward
    ``target``, the convention used for ordinary scene objects"""
    if up is None:
        up = geom.up()
    z = geom.sub(target,position)
    if geom.mag(z) < geom.epsilon:
        z = [0,0,1.0,1.0]
    z = geom.normalize(z)
    return Basis(*_orthobasis(z,up))

## OpenGL-style clip transforms, mapping the view volume onto the
## [-1,1] cube.  The camera looks down its local -Z axis.

def Frustum(left,right,top,bottom,near,far):
    x = 2*near/(right-left)
    y = 2*near/(top-bottom)
    a = (right+left)/(right-left)
    b = (top+bottom)/(top-bottom)
    c = -(far+near)/(far-near)
    d = -2*far*near/(far-near)
    return Matrix([[x,0,a,0],
                   [0,y,b,0],
                   [0,0,c,d],
                   [0,0,-1,0]])

def Perspective(fov,aspect,near,far):
    """perspective projection; ``fov`` is the vertical field of view in
    degrees"""
    top = near*tan(radians(0.5*fov))
    height = 2*top
    width = aspect*height
    left = -0.5*width
    return Frustum(left,left+width,top,top-height,near,far)

def Orthographic(left,right,top,bottom,near,far):
    w = 1.0/(right-left)
    h = 1.0/(top-bottom)
    p = 1.0/(far-near)
    x = (right+left)*w
    y = (top+bottom)*h
    z = (far+near)*p
    return Matrix([[2*w,0,0,-x],
                   [0,2*h,0,-y],
                   [0,0,-2*p,-z],
                   [0,0,0,1]])


class Frame:
    """position and orientation of a scene node.

    ``rotation`` must be a pure rotation, so that its inverse is its
    transpose.  Points are mapped into world space by rotating first,
    then translating.
    """

    def __init__(self,position=None,rotation=None):
        self.position = geom.point(0,0,0) if position is None else geom.point(position)
        self.rotation = Matrix() if rotation is None else Matrix(rotation)

    def __repr__(self):
        return "Frame({},{})".format(geom.vstr(self.position),self.rotation)

    def matrix(self):
        return Translation(self.position).mul(self.rotation)

    def inverse_matrix(self):
        return self.rotation.transpose().mul(Translation(self.position,inverse=True))

    def local_to_world(self,p):
        return self.matrix().transform_point(p)

    def world_to_local(self,p):
        return self.inverse_matrix().transform_point(p)

    def look_at(self,target,up=None):
        self.rotation = FacingRotation(self.position,target,up)

    def reset(self):
        self.position = geom.point(0,0,0)
        self.rotation = Matrix()
